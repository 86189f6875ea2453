"""Test suite package marker so nested modules get fully qualified names."""
