import logging
import os
from dotenv import load_dotenv

load_dotenv()

DB_PATH = os.getenv('CARDS_DB_PATH') or os.path.join(
    os.path.dirname(os.path.abspath(__file__)), 'cards.db'
)
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL, logging.INFO)
)
