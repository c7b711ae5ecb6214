USER_ROUTES = {
    "register": "/register",
    "login":    "/login",
    "me":       "/me",
}

USER_PREFIX = "/api/users"
USER_TAG    = "Users"
