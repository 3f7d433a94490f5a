"""HR training course records with a local store and an optional remote mirror."""
