"""
Per-chain metadata used when rendering reports.

Explorer templates carry an `{address}` placeholder. The native symbol is
derived from the wrapped one by dropping its leading w/W (WBNB -> BNB).
"""

from dataclasses import dataclass
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainMetadata:
    chain: str
    wnative_symbol: str
    address_link_template: Optional[str] = None

    @property
    def native_symbol(self) -> str:
        if len(self.wnative_symbol) > 1 and self.wnative_symbol[0] in ("w", "W"):
            return self.wnative_symbol[1:]
        return self.wnative_symbol

    def address_link(self, address: str) -> Optional[str]:
        if not self.address_link_template:
            return None
        return self.address_link_template.replace("{address}", address)


CHAIN_METADATA = {
    "arbitrum": ChainMetadata("arbitrum", "WETH", "https://arbiscan.io/address/{address}"),
    "avax": ChainMetadata("avax", "WAVAX", "https://snowtrace.io/address/{address}"),
    "base": ChainMetadata("base", "WETH", "https://basescan.org/address/{address}"),
    "bsc": ChainMetadata("bsc", "WBNB", "https://bscscan.com/address/{address}"),
    "canto": ChainMetadata("canto", "WCANTO", "https://tuber.build/address/{address}"),
    "cronos": ChainMetadata("cronos", "WCRO", "https://cronoscan.com/address/{address}"),
    "ethereum": ChainMetadata("ethereum", "WETH", "https://etherscan.io/address/{address}"),
    "fantom": ChainMetadata("fantom", "WFTM", "https://ftmscan.com/address/{address}"),
    "fuse": ChainMetadata("fuse", "WFUSE", "https://explorer.fuse.io/address/{address}"),
    "gnosis": ChainMetadata("gnosis", "WXDAI", "https://gnosisscan.io/address/{address}"),
    "kava": ChainMetadata("kava", "WKAVA", "https://kavascan.com/address/{address}"),
    "linea": ChainMetadata("linea", "WETH", "https://lineascan.build/address/{address}"),
    "metis": ChainMetadata("metis", "WMETIS", "https://andromeda-explorer.metis.io/address/{address}"),
    "moonbeam": ChainMetadata("moonbeam", "WGLMR", "https://moonscan.io/address/{address}"),
    "moonriver": ChainMetadata("moonriver", "WMOVR", "https://moonriver.moonscan.io/address/{address}"),
    "optimism": ChainMetadata("optimism", "WETH", "https://optimistic.etherscan.io/address/{address}"),
    "polygon": ChainMetadata("polygon", "WMATIC", "https://polygonscan.com/address/{address}"),
    "zkevm": ChainMetadata("zkevm", "WETH", "https://zkevm.polygonscan.com/address/{address}"),
    "zksync": ChainMetadata("zksync", "WETH", "https://explorer.zksync.io/address/{address}"),
}  # type: Dict[str, ChainMetadata]


def get_chain_metadata(chain: str) -> ChainMetadata:
    """
    Metadata for a chain id.

    Unknown chains get a generic WNATIVE entry without explorer links so a
    report for a newly added chain still renders.
    """
    metadata = CHAIN_METADATA.get(chain)
    if metadata is None:
        logger.warning(f"[CHAIN_UNKNOWN] No metadata for chain={chain}, using generic symbols")
        return ChainMetadata(chain, "WNATIVE")
    return metadata


__all__ = ["ChainMetadata", "CHAIN_METADATA", "get_chain_metadata"]
