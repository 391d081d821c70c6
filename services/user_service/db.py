from sqlalchemy.orm import declarative_base

from shared.config import require
from shared.database import get_engine, get_session

DATABASE_URL = require("USER_DB")

engine = get_engine(DATABASE_URL)
SessionLocal = get_session(engine)

Base = declarative_base()
