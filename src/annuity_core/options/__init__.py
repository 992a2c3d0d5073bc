"""Option pricing and crediting-formula payoffs."""
