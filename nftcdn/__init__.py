"""Read-through cache and gateway for on-chain token metadata and images."""
