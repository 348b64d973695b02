import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    # Flask settings
    SECRET_KEY = os.getenv('SECRET_KEY')
    FLASK_ENV = os.getenv('FLASK_ENV', 'development')
    DEBUG = FLASK_ENV == 'development'
    PORT = int(os.getenv('PORT', 5000))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # CORS settings
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*').split(',')

    # Firebase settings
    DEV_MODE = os.getenv('DEV_MODE', 'false').lower() == 'true'
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')
    FIREBASE_WEB_API_KEY = os.getenv('FIREBASE_WEB_API_KEY')

    # Routing
    DEFAULT_ROUTE = os.getenv('DEFAULT_ROUTE', '/tongquan')

    # Retention / paging
    NOTIFICATION_RETENTION_DAYS = int(os.getenv('NOTIFICATION_RETENTION_DAYS', 3))
    ACTIVITY_PAGE_SIZE = int(os.getenv('ACTIVITY_PAGE_SIZE', 10))
    MAX_PAGE_SIZE = 100

    @classmethod
    def validate(cls):
        """Validate required settings"""
        missing_vars = []
        if not cls.DEV_MODE:
            for var in ('SECRET_KEY', 'FIREBASE_PROJECT_ID'):
                if not getattr(cls, var):
                    missing_vars.append(var)

        if missing_vars:
            raise ValueError(f"Missing required environment variables: {', '.join(missing_vars)}")

        if cls.SECRET_KEY and len(cls.SECRET_KEY) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long")

        if not cls.DEFAULT_ROUTE.startswith('/'):
            raise ValueError("DEFAULT_ROUTE must start with '/'")

        return True


def configure_logging(level: str = None):
    logging.basicConfig(
        level=getattr(logging, level or Settings.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
