"""Platform adapters: logging and the MusicBrainz HTTP stack."""
