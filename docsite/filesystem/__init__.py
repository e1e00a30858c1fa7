"""Content directory readers: site.toml, front matter and page discovery."""
