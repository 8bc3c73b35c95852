"""HTTP API server for SuperUI: component lookup, landing templates, clone workflow."""
