import os
from typing import List, Union, Optional
from pydantic import AnyHttpUrl, validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Razorpay Ghost Bridge")

    RAZORPAY_KEY_ID: str = os.getenv("RAZORPAY_KEY_ID", "")
    RAZORPAY_KEY_SECRET: str = os.getenv("RAZORPAY_KEY_SECRET", "")

    GHOST_API_URL: str = os.getenv("GHOST_API_URL", "")
    GHOST_ADMIN_API_KEY: str = os.getenv("GHOST_ADMIN_API_KEY", "")
    GHOST_API_VERSION: str = os.getenv("GHOST_API_VERSION", "v5.0")
    GHOST_SITE_URL: Optional[str] = os.getenv("GHOST_SITE_URL")
    GHOST_TIMEOUT: float = float(os.getenv("GHOST_TIMEOUT", "10"))

    # Display metadata handed to the checkout widget
    SITE_NAME: str = os.getenv("SITE_NAME", "Your Site Name")
    SITE_LOGO: str = os.getenv("SITE_LOGO", "https://yoursite.com/logo.png")

    SUCCESS_URL: str = os.getenv("SUCCESS_URL", "/membership-success/")
    MEMBER_LABEL: str = os.getenv("MEMBER_LABEL", "razorpay-customer")

    # CORS
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = []

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    @property
    def cors_origins(self) -> List[str]:
        """
        Origins allowed to call the API from the browser.
        The Ghost site URL wins when set; otherwise BACKEND_CORS_ORIGINS, then '*'.
        """
        if self.GHOST_SITE_URL:
            return [self.GHOST_SITE_URL]
        if self.BACKEND_CORS_ORIGINS:
            return [str(origin) for origin in self.BACKEND_CORS_ORIGINS]
        return ["*"]

    class Config:
        case_sensitive = True

settings = Settings()
