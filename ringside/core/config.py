from functools import lru_cache
from typing import Dict, List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "dev"
    DATABASE_URL: str = "sqlite:///./ringside.db"

    # Vocabularies and roster
    LEXICON_PATH: str = ""  # empty = bundled ringside/lexicon/wrestling.yaml
    ROSTER_PATH: str = ""   # empty = bundled ringside/lexicon/roster.yaml

    # Content sources
    RSS_FEEDS: Dict[str, str] = {
        "Wrestling Inc": "https://www.wrestlinginc.com/feed/",
        "411 Mania": "https://411mania.com/wrestling/feed/",
        "Fightful": "https://www.fightful.com/wrestling/feed",
        "F4W Online": "https://www.f4wonline.com/feed",
        "Sescoops": "https://www.sescoops.com/feed/",
        "PWMania": "https://www.pwmania.com/feed",
        "PWTorch": "https://www.pwtorch.com/site/feed",
        "PWInsider": "https://www.pwinsider.com/rss.php",
        "Wrestling Headlines": "https://www.wrestlingheadlines.com/feed/",
        "Ringside News": "https://www.ringsidenews.com/feed/",
        "WrestleZone": "https://www.wrestlezone.com/feed/",
        "Cageside Seats": "https://www.cagesideseats.com/rss/current",
    }
    SUBREDDITS: List[str] = [
        "SquaredCircle",
        "WWE",
        "AEWOfficial",
        "Wreddit",
        "SCJerk",
        "njpw",
        "ROH",
        "ImpactWrestling",
        "IndieWrestling",
        "FantasyBooking",
        "WrestlingGM",
        "prowrestling",
    ]
    HTTP_USER_AGENT: str = "ringside/1.0 (wrestling news analytics)"
    HTTP_TIMEOUT_SECONDS: float = 5.0

    # Analysis
    SCORING_PROFILE: str = "standard"
    ANALYSIS_PERIOD_DAYS: int = 7

    # Auto update
    AUTO_UPDATE_ENABLED: bool = True
    AUTO_UPDATE_INTERVAL_MINUTES: int = 10

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
