import logging
from typing import Dict

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from pydantic import TypeAdapter, ValidationError

from . import rules
from .catalog import default_catalog
from .models import HealthResponse, ReconcileRequest, ReconcileResponse, VariableDefinitionResponse
from .normalize import normalize_options, reconcile_variables
from .optionfile import OptionFileError, read_option_sections

logging.basicConfig(
    level=rules.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

_observed_adapter = TypeAdapter(Dict[str, str])

app = FastAPI(
    title="mycnf-sync",
    description="Reconcile MySQL option file values against live server variables",
    version="0.1.0",
)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/variables/{name}", response_model=VariableDefinitionResponse)
def get_variable(name: str):
    definition = default_catalog().lookup(name)
    if definition is None:
        raise HTTPException(status_code=404, detail=f"Unknown variable: {name}")
    return {"name": definition.name, "type": definition.type.value}


@app.post("/reconcile", response_model=ReconcileResponse)
def reconcile(request: ReconcileRequest):
    if request.normalize_keys:
        desired = normalize_options(request.desired)
    else:
        # Bare keys still mean ON.
        desired = {k: rules.BOOLEAN_ON if v is None else v for k, v in request.desired.items()}
    return reconcile_variables(default_catalog(), desired, request.observed)


@app.post("/reconcile/cnf", response_model=ReconcileResponse)
async def reconcile_cnf(
    file: UploadFile = File(...),
    observed: str = Form(...),
    section: str = Form(rules.SERVER_SECTION),
):
    if not (file.filename or "").lower().endswith(rules.OPTION_FILE_SUFFIXES):
        raise HTTPException(status_code=422, detail="Only .cnf or .ini option files are supported")

    try:
        observed_values = _observed_adapter.validate_json(observed)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=f"Invalid observed variables: {exc}")

    raw = await file.read()
    try:
        sections, option_report = read_option_sections(raw)
    except OptionFileError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    section = section.lower()
    if section not in sections:
        logger.info("Section [%s] not found in %s", section, file.filename)
        desired = {}
    else:
        desired = normalize_options(sections[section])

    result = reconcile_variables(default_catalog(), desired, observed_values)
    result["report"]["option_file"] = option_report
    return result
