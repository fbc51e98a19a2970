from .accounts import AccountProvisioner, create_associated_account_instruction, derive_associated_address
from .amounts import TokenAmount, from_base_units, to_base_units
from .config import SwapConfig, VenueConfig
from .jupiter import JupiterClient
from .models import Quote, SwapReceipt, SwapTransaction
from .pipeline import SwapPipeline
from .transactions import TransactionSubmitter

__all__ = [
    "AccountProvisioner",
    "create_associated_account_instruction",
    "derive_associated_address",
    "TokenAmount",
    "from_base_units",
    "to_base_units",
    "SwapConfig",
    "VenueConfig",
    "JupiterClient",
    "Quote",
    "SwapReceipt",
    "SwapTransaction",
    "SwapPipeline",
    "TransactionSubmitter",
]
