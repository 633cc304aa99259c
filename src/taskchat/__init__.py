"""taskchat - task retrieval, filtering and ranking over indexed Markdown vaults."""

__version__ = "0.1.0"
