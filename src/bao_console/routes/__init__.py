"""Gateway routers, one per upstream resource."""
