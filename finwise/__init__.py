"""FinWise personal-finance assistant backend."""
