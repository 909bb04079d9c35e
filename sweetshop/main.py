import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from sweetshop.core import config
from sweetshop.core.errors import ShopError
from sweetshop.database import SessionLocal, init_database
from sweetshop.routes import auth_routes, sweet_routes
from sweetshop.seed import seed_database

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

app = FastAPI(title='Mithai & More API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        init_database()
        if config.SEED_ON_STARTUP:
            db = SessionLocal()
            try:
                seed_database(db)
            finally:
                db.close()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.exception_handler(ShopError)
def handle_shop_error(request: Request, exc: ShopError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error('%s %s failed: %s', request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={'error': exc.message})


@app.get('/')
def root():
    return {'status': 'Mithai & More API Running'}


app.include_router(auth_routes.router, prefix=f'{config.API_PREFIX}/auth')
app.include_router(sweet_routes.router, prefix=f'{config.API_PREFIX}/sweets')


if __name__ == '__main__':
    import uvicorn

    uvicorn.run(app, host='0.0.0.0', port=config.PORT)
