"""Discovery and classification of Zeek sensor logs for import."""
