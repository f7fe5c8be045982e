"""Aapda Mitra offline-first disaster preparedness backend."""
