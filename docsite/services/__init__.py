"""Site services: routes, links, theme, pages and builds."""
