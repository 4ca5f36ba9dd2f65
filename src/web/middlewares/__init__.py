"""Web application middlewares."""
