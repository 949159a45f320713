"""CBR Rates: daily exchange-rate statistics from the Central Bank of Russia feed."""

__version__ = "0.1.0"
