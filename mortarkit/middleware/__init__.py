"""Middleware helpers: header forwarding, log-context extraction, gateway header matching and call timing."""