from server.racing_line_api import router as racing_line_router

from .status_routes import router as status_router

all_routers = [status_router, racing_line_router]
