"""
ANAF (Romanian fiscal registry) gateway.

Fetches the yearly balance sheet ("bilant") published for a fiscal code.
The registry is treated as unreliable: an empty answer is returned as
None, transport and decoding failures are raised to the caller which
decides whether they are fatal.
"""
import logging
from typing import List, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class AnafError(Exception):
    """Raised when the registry could not be reached or answered garbage."""


class AnafService:

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None, session=None):
        self.base_url = base_url or settings.ANAF_URL
        self.timeout = timeout if timeout is not None else settings.ANAF_REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def get_financial_information(self, cui: str, year: int) -> Optional[List[dict]]:
        """
        Return the list of balance-sheet indicators for `cui` in `year`.

        Each indicator is a dict such as
        {"indicator": "I38", "val_indicator": 1200, "val_den_indicator": "..."}.
        Returns None when the registry has nothing for that year.
        """
        sanitized = _sanitize_cui(cui)
        try:
            response = self.session.get(
                self.base_url,
                params={'an': year, 'cui': sanitized},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"ANAF request failed for cui={sanitized} year={year}: {e}")
            raise AnafError(str(e)) from e

        indicators = body.get('i') if isinstance(body, dict) else None
        if not indicators:
            logger.info(f"ANAF returned no indicators for cui={sanitized} year={year}")
            return None

        return indicators


def _sanitize_cui(cui: str) -> str:
    # Fiscal codes are stored with an optional "RO" VAT prefix
    value = (cui or '').strip().upper()
    if value.startswith('RO'):
        value = value[2:]
    return value.strip()
