"""Services — database operations shared by the server routes and the gateway handler."""
