from students.routes import archive, authentication, groups, queues, users

API_PREFIX = "/api"


def register_routes(app):
    for module in (authentication, users, groups, queues, archive):
        app.register_blueprint(module.bp, url_prefix=API_PREFIX)
