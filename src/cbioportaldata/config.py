"""Runtime settings, read from the environment (and a ``.env`` file)."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

HOSTNAME = os.getenv("CBIOPORTAL_HOSTNAME", "www.cbioportal.org")
PROTOCOL = os.getenv("CBIOPORTAL_PROTOCOL", "https")
API_PATH = os.getenv("CBIOPORTAL_API_PATH", "/api/api-docs")

# md5 of the API descriptor this client was written against
API_CHECKSUM = os.getenv("CBIOPORTAL_API_CHECKSUM", "6abc321feb60da3251620743b527bab9")

CACHE_DIR = Path(
    os.getenv("CBIOPORTAL_CACHE", str(Path.home() / ".cache" / "cbioportaldata"))
).expanduser()

TIMEOUT = float(os.getenv("CBIOPORTAL_TIMEOUT", "120"))

# Token string or path to a token file
TOKEN = os.getenv("CBIOPORTAL_TOKEN") or None

# Connection pool, sized for batch fetches against a single host
POOL_SIZE = 10
MAX_RETRIES = 3

PROJECTIONS = ("SUMMARY", "ID", "DETAILED", "META")
GENE_ID_TYPES = {
    "entrezGeneId": "ENTREZ_GENE_ID",
    "hugoGeneSymbol": "HUGO_GENE_SYMBOL",
}
