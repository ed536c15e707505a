"""CasanovaStudy API gateway."""
