import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Trivia Quiz API")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./trivia_quiz.db")

    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me-in-production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", str(7 * 24 * 60)))

    TRIVIA_API_URL: str = os.getenv("TRIVIA_API_URL", "https://opentdb.com")
    TRIVIA_TIMEOUT_SECONDS: float = float(os.getenv("TRIVIA_TIMEOUT_SECONDS", "10"))
    TRIVIA_RETRY_ATTEMPTS: int = int(os.getenv("TRIVIA_RETRY_ATTEMPTS", "3"))

    QUIZ_SIZE: int = int(os.getenv("QUIZ_SIZE", "15"))
    QUIZ_TIME_LIMIT_SECONDS: int = int(os.getenv("QUIZ_TIME_LIMIT_SECONDS", "1800"))

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


settings = Settings()
