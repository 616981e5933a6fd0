"""On-demand image resizing gateway."""
