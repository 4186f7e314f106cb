"""Click entry points, one module per installed executable."""
