import os
from typing import Any, Dict

# FastAPI creates the app object and defines the routes
from fastapi import FastAPI, Body, HTTPException
from fastapi.responses import JSONResponse

# The core engine that reconciles declared records with live DNS.
from zonecheck import ZoneTester

# Declared configuration parsing (native layout or Route53 export)
from zoneconfig import ConfigError, parse_config

# Turn the run report into something the user can see
from reporting.assembler import Assemble

app = FastAPI(title="DNS Zone Checker")

# Comma separated nameserver IPs; empty means the host resolver configuration.
NAMESERVERS = [ns.strip() for ns in os.getenv("ZONECHECK_NAMESERVERS", "").split(",") if ns.strip()]
DNS_TIMEOUT = float(os.getenv("ZONECHECK_TIMEOUT", "5.0"))
DNS_LIFETIME = float(os.getenv("ZONECHECK_LIFETIME", "10.0"))

# DNS checking objects
tester = ZoneTester.from_options(nameservers=NAMESERVERS or None, timeout=DNS_TIMEOUT, lifetime=DNS_LIFETIME)
assembler = Assemble()


@app.get("/health")
def health():
    return {"status": "ok"}


# Check a declared zone configuration
@app.post("/check")
def check(config: Dict[str, Any] = Body(...), zone: str = ""):
    # Validate + parse input
    try:
        declared = parse_config(config, zone=zone or None)
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))

    report = tester.test(declared)

    target = ", ".join(z.name for z in declared.hosted_zones)
    response = assembler.build(
        target=target,
        report=report,
        meta={"version": "0.1", "source": "api", "nameservers": NAMESERVERS},
    )
    return JSONResponse(content=response)
