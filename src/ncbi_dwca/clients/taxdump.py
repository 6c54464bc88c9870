"""HTTP client for the NCBI taxdump archive.

Downloads ``new_taxdump.zip`` from the NCBI FTP site over HTTPS, streaming
the body to disk in chunks.

References:
    - https://ftp.ncbi.nlm.nih.gov/pub/taxonomy/new_taxdump/taxdump_readme.txt
"""

import logging
from pathlib import Path

import requests
from tqdm import tqdm  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

TAXDUMP_URL = "https://ftp.ncbi.nlm.nih.gov/pub/taxonomy/new_taxdump/new_taxdump.zip"
DEFAULT_TIMEOUT = 60.0  # seconds to connect / between received bytes
DEFAULT_USER_AGENT = "ncbi-dwca/0.1.0 (python-requests)"
CHUNK_SIZE = 1024 * 1024


class TaxdumpDownloadError(RuntimeError):
    """The taxdump archive could not be downloaded."""


class TaxdumpClient:
    """Download client for the taxdump archive.

    Example:
        >>> client = TaxdumpClient()
        >>> client.url
        'https://ftp.ncbi.nlm.nih.gov/pub/taxonomy/new_taxdump/new_taxdump.zip'
    """

    def __init__(
        self,
        url: str = TAXDUMP_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str | None = None,
    ):
        """Initialize the client.

        Args:
            url: Archive URL
            timeout: Request timeout in seconds
            user_agent: Custom User-Agent string (uses default if not provided)
        """
        self.url = url
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": user_agent or DEFAULT_USER_AGENT})

    def download(self, target: Path | str, show_progress: bool = True) -> Path:
        """Stream the archive to ``target``.

        Args:
            target: File to write
            show_progress: Show a tqdm progress bar

        Returns:
            Path to the downloaded archive

        Raises:
            TaxdumpDownloadError: On network or HTTP errors
        """
        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Download NCBI dump from {self.url}")

        try:
            with self._session.get(self.url, stream=True, timeout=self.timeout, allow_redirects=True) as response:
                logger.info(f"Response {response.status_code}: {response.reason}")
                response.raise_for_status()
                total = int(response.headers.get("Content-Length", 0)) or None
                with (
                    target.open("wb") as f,
                    tqdm(total=total, unit="B", unit_scale=True, desc=target.name, disable=not show_progress) as pbar,
                ):
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        f.write(chunk)
                        pbar.update(len(chunk))
        except requests.RequestException as e:
            target.unlink(missing_ok=True)
            raise TaxdumpDownloadError(f"Failed to download {self.url}: {e}") from e

        logger.info(f"Downloaded {target.stat().st_size:,} bytes to {target}")
        return target

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()
