import os
from dotenv import load_dotenv
from pathlib import Path
import bittensor as bt

env_path = Path(__file__).parents[1] / '.env'
load_dotenv(dotenv_path=env_path)

# Data and cache locations
DATA_DIR = os.getenv('DATA_DIR', str(Path(__file__).resolve().parents[3] / "data"))
CACHE_ROOT = Path(__file__).resolve().parents[3] / "cache"
CACHE_DIRS = {
    "staking_ledgers": os.path.join(CACHE_ROOT, "staking_ledgers"),
}
SUBSTITUTE_PAY_TO_FILE = os.path.join(DATA_DIR, ".substitutePayTo")
PAID_BLOCKS_FILE = os.path.join(DATA_DIR, ".paidblocks")
NPS_ADDRESSES_FILE = os.getenv('NPS_ADDRESSES_FILE', os.path.join(DATA_DIR, ".npsAddresses"))

__version__ = "1.0.0"

# Pool identity
POOL_PUBLIC_KEY = os.getenv('POOL_PUBLIC_KEY', '')
SENDER_PUBLIC_KEY = os.getenv('SENDER_PUBLIC_KEY', '')

# Archive proxy
ARCHIVE_API_URL = os.getenv('ARCHIVE_API_URL', 'http://localhost:8080')
ARCHIVE_BLOCKS_ENDPOINT = f"{ARCHIVE_API_URL}/blocks"
ARCHIVE_CONSENSUS_ENDPOINT = f"{ARCHIVE_API_URL}/consensus"
ARCHIVE_STAKING_LEDGER_ENDPOINT = f"{ARCHIVE_API_URL}/staking-ledgers"
ARCHIVE_EPOCH_ENDPOINT = f"{ARCHIVE_API_URL}/epochs"
ARCHIVE_REQUEST_TIMEOUT = 30

# Payout policy
COMMISSION_RATE = os.getenv('COMMISSION_RATE', '0.05')
NPS_COMMISSION_RATE = '0.05'  # fixed by delegation program rules
MIN_HEIGHT = int(os.getenv('MIN_HEIGHT', '0'))
MAX_HEIGHT = int(os.getenv('MAX_HEIGHT')) if os.getenv('MAX_HEIGHT') else None
CONFIRMATIONS = int(os.getenv('CONFIRMATIONS', '10'))
PAYOUT_THRESHOLD = int(os.getenv('PAYOUT_THRESHOLD', '0'))
SEND_TRANSACTION_FEE = int(os.getenv('SEND_TRANSACTION_FEE', '10000000'))  # nanomina
PAYOUT_HASH = os.getenv('PAYOUT_HASH')
PAYOUT_MEMO = os.getenv('PAYOUT_MEMO', '')

NANOMINA_PER_MINA = 1_000_000_000

# Events log
EVENTS_LOG_DIR = os.getenv('EVENTS_LOG_DIR', os.path.join(DATA_DIR, "logs"))
EVENTS_RETENTION_SIZE = int(os.getenv('EVENTS_RETENTION_SIZE', str(2 * 1024 * 1024)))

# Log out all non-sensitive config variables
bt.logging.info(f"POOL_PUBLIC_KEY: {POOL_PUBLIC_KEY}")
bt.logging.info(f"ARCHIVE_API_URL: {ARCHIVE_API_URL}")
bt.logging.info(f"DATA_DIR: {DATA_DIR}")
bt.logging.info(f"COMMISSION_RATE: {COMMISSION_RATE}")
bt.logging.info(f"MIN_HEIGHT: {MIN_HEIGHT}")
bt.logging.info(f"MAX_HEIGHT: {MAX_HEIGHT}")
bt.logging.info(f"CONFIRMATIONS: {CONFIRMATIONS}")
bt.logging.info(f"PAYOUT_THRESHOLD: {PAYOUT_THRESHOLD}")
bt.logging.info(f"SEND_TRANSACTION_FEE: {SEND_TRANSACTION_FEE}")
