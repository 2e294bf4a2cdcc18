# routes.py
from fastapi import FastAPI
from controller.analysis_controller import analysis_router
from controller.knowledge_base_controller import knowledge_base_router
from controller.prompt_controller import prompt_router
from controller.validation_controller import validation_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(validation_router)
    app.include_router(knowledge_base_router)
    app.include_router(analysis_router)
    app.include_router(prompt_router)
