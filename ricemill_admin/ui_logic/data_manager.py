"""
Framework-agnostic master data for the bag-rates page.

This module loads the two collaborator lists the pricing matrix depends on:
- crop years, offered by start year (newest first, one entry per year)
- active rice types, in server order

Results are cached on the manager until `refresh()` is called.
"""

from typing import Dict, List, Optional, Tuple
import logging

from ..api import ApiClient
from ..errors import MalformedResponse, RequestFailed
from ..master_data import list_crop_years, list_master_rice_types
from ..models import CropYear, RiceType

logger = logging.getLogger(__name__)


class DataManager:
    """Loads and caches crop years and active rice types."""

    def __init__(self, client: ApiClient, crop_year_page_limit: int = 50):
        """Initialize the data manager.

        Args:
            client: API client used for the list calls
            crop_year_page_limit: Page size for the single crop-year page fetched
        """
        self.client = client
        self.crop_year_page_limit = crop_year_page_limit
        self._crop_years: Optional[List[CropYear]] = None
        self._rice_types: Optional[List[RiceType]] = None

    def load_crop_years(self) -> Tuple[bool, Optional[str], List[CropYear]]:
        """Load crop years.

        Returns:
            Tuple of (success, error_message, crop_years)
        """
        if self._crop_years is not None:
            return True, None, self._crop_years
        try:
            page = list_crop_years(self.client, page=1, limit=self.crop_year_page_limit)
        except (MalformedResponse, RequestFailed) as e:
            logger.error(f"Error loading crop years: {e}")
            return False, str(e) or "Failed to load crop years.", []
        self._crop_years = list(page.items)
        logger.info(f"Loaded {len(self._crop_years)} crop years")
        return True, None, self._crop_years

    def load_rice_types(self) -> Tuple[bool, Optional[str], List[RiceType]]:
        """Load active rice types.

        Returns:
            Tuple of (success, error_message, rice_types)
        """
        if self._rice_types is not None:
            return True, None, self._rice_types
        try:
            items = list_master_rice_types(self.client, include_inactive=False)
        except (MalformedResponse, RequestFailed) as e:
            logger.error(f"Error loading rice types: {e}")
            return False, str(e) or "Failed to load rice types.", []
        # The server filters too; inactive rows must never reach the matrix regardless
        self._rice_types = [rt for rt in items if rt.is_active]
        logger.info(f"Loaded {len(self._rice_types)} active rice types")
        return True, None, self._rice_types

    def refresh(self) -> None:
        self._crop_years = None
        self._rice_types = None

    def crop_year_options(self) -> List[int]:
        """Distinct crop-year start years, newest first."""
        years = {cy.start_year for cy in self._crop_years or []}
        return sorted(years, reverse=True)

    def crop_year_labels(self) -> Dict[int, str]:
        labels: Dict[int, str] = {}
        for cy in self._crop_years or []:
            labels[cy.start_year] = cy.label
        return labels

    def label_for(self, start_year: int) -> str:
        return self.crop_year_labels().get(start_year, str(start_year))

    def default_crop_year(self) -> Optional[int]:
        options = self.crop_year_options()
        return options[0] if options else None
