"""Local TRON-style chain: identities, contracts and the simulator node."""
