from fastapi import FastAPI, UploadFile, File, HTTPException
from .models import CleanResponse, HealthResponse
from .clean import clean_csv_bytes
from .detect import check_encoding, detect_bytes
from .errors import CsvCleanError
from .rules import CSV_SUFFIX

app = FastAPI(
    title="csv-clean",
    description="Replace non-printable characters in windows-1252 CSV files",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/clean", response_model=CleanResponse)
async def clean_csv(file: UploadFile = File(...)):
    if not (file.filename or "").endswith(CSV_SUFFIX):
        raise HTTPException(status_code=422, detail=f'File does not have "{CSV_SUFFIX}" extension')

    raw = await file.read()
    try:
        encoding = detect_bytes(raw)
        check_encoding(encoding)
        return clean_csv_bytes(raw, encoding)
    except CsvCleanError as e:
        raise HTTPException(status_code=422, detail=str(e))
