# FastAPI service for the prompt refinement pipeline
