"""HTTP clients for ncbi-dwca."""

from ncbi_dwca.clients.taxdump import TAXDUMP_URL, TaxdumpClient, TaxdumpDownloadError

__all__ = [
    "TAXDUMP_URL",
    "TaxdumpClient",
    "TaxdumpDownloadError",
]
