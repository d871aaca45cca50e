import azure.functions as func

from library_recommendation_service.blueprints import movies_bp

app = func.FunctionApp()

app.register_blueprint(movies_bp)
