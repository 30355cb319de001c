# FastAPI dependencies
