"""On-chain and 0x API helpers used by the swap command."""
