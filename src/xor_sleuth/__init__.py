"""Single-byte XOR key recovery by English letter frequency analysis."""
