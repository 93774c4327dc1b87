"""
Protocols package - Registered fee adapters for individual protocols.
"""

from fee_adapters.protocols import goplus, voodoo_trade


PROTOCOLS = {
    goplus.NAME: goplus,
    voodoo_trade.NAME: voodoo_trade,
}


__all__ = [
    "PROTOCOLS",
    "goplus",
    "voodoo_trade",
]
