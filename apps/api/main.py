# apps/api/main.py
from fastapi import FastAPI
from libs.observability.logging import setup_logging
from apps.api.deps import get_settings
from apps.api.routers import health, job_runner, jobs
from fastapi.responses import HTMLResponse

app = FastAPI(title="hr-serverless-jobs API")
setup_logging(get_settings().LOG_LEVEL, json=not get_settings().is_development)

@app.get("/", response_class=HTMLResponse)
def root():
    return """
    <html><body>
      <h1>HR Serverless Jobs API</h1>
      <p>See <a href="/docs">/docs</a> for Swagger UI.</p>
    </body></html>
    """

app.include_router(health.router)
app.include_router(job_runner.router)
app.include_router(jobs.router)
