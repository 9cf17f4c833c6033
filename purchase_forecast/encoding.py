"""
Product Encoding Module

Bidirectional product description <-> integer code table. Codes are dense,
start at 0 and follow first appearance, so the same record order always
yields the same codes.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from .errors import UnknownProduct
from .validation import SalesRecord


class ProductCatalog:
    """Ordered product table used as the category encoder"""

    def __init__(self):
        self._descriptions: List[str] = []
        self._codes: Dict[str, int] = {}

    def encode(self, description: str) -> int:
        """
        Return the code for a description, assigning the next one if unseen

        Args:
            description: Product description

        Returns:
            Integer product code
        """
        code = self._codes.get(description)
        if code is None:
            code = len(self._descriptions)
            self._descriptions.append(description)
            self._codes[description] = code
        return code

    def code_for(self, description: str) -> int:
        """Look up an existing code without assigning one"""
        if description not in self:
            raise UnknownProduct(description, available=self.descriptions)
        return self._codes[description]

    def description_for(self, code: int) -> str:
        if not 0 <= code < len(self._descriptions):
            raise KeyError(code)
        return self._descriptions[code]

    @property
    def descriptions(self) -> Tuple[str, ...]:
        """Descriptions in code order (for a product selector)"""
        return tuple(self._descriptions)

    @property
    def mapping(self) -> Mapping[str, int]:
        """Read-only description -> code view"""
        return MappingProxyType(self._codes)

    def __contains__(self, description) -> bool:
        return isinstance(description, str) and description in self._codes

    def __len__(self) -> int:
        return len(self._descriptions)

    def __iter__(self):
        return iter(self.descriptions)

    def __repr__(self) -> str:
        return f"ProductCatalog({list(self._descriptions)!r})"


@dataclass(frozen=True)
class CleanRecord:
    """Sales record ready for modeling"""
    month_index: int
    product_code: int
    quantity_sold: float


def encode_records(records: Iterable[SalesRecord],
                   catalog: ProductCatalog) -> List[CleanRecord]:
    """
    Encode validated records through a shared catalog

    Args:
        records: Validated records, in input order
        catalog: Catalog to populate (codes assigned on first sight)

    Returns:
        Clean records with absolute month index and product code
    """
    return [
        CleanRecord(
            month_index=record.month_index,
            product_code=catalog.encode(record.product_description),
            quantity_sold=record.quantity_sold
        )
        for record in records
    ]
