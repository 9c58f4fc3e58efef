"""Services shared by the config store: diagnostics, theme resolution, background saving."""
