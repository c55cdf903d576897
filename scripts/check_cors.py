#!/usr/bin/env python3
"""
CORS Check Script
Verifica la configuración CORS de ServiVENT API contra un servidor en ejecución
"""

import sys
from typing import Dict, Optional

import requests

ENDPOINTS = [
    "/api/v1/create-purchase",
    "/api/v1/create-sale",
    "/api/v1/registrar-pago-compra",
    "/api/v1/eliminar-pago-compra",
    "/api/v1/receive-purchase-stock",
    "/api/v1/update-branch-prices",
]

REQUIRED_HEADERS = ("authorization", "x-client-info", "apikey", "content-type")


def check_cors_configuration(base_url: str = "http://localhost:8000",
                             origin: str = "http://localhost:5173") -> Dict:
    """Enviar un preflight a cada endpoint y resumir los resultados"""

    results = {"base_url": base_url, "origin": origin, "checks": []}
    for path in ENDPOINTS:
        results["checks"].append(perform_preflight(base_url, path, origin))

    passed = sum(1 for check in results["checks"] if check["status"] == "PASS")
    results["summary"] = {
        "total": len(results["checks"]),
        "passed": passed,
        "failed": len(results["checks"]) - passed,
    }
    return results


def perform_preflight(base_url: str, path: str, origin: str) -> Dict:
    headers = {
        "Origin": origin,
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": ", ".join(REQUIRED_HEADERS),
    }

    try:
        response = requests.options(f"{base_url}{path}", headers=headers, timeout=10)
    except requests.exceptions.RequestException as e:
        return {"path": path, "status": "ERROR", "message": f"Request failed: {e}"}

    allow_origin: Optional[str] = response.headers.get("Access-Control-Allow-Origin")
    allow_headers = (response.headers.get("Access-Control-Allow-Headers") or "").lower()
    missing = [h for h in REQUIRED_HEADERS if h not in allow_headers]

    if response.status_code == 200 and allow_origin == "*" and not missing:
        return {"path": path, "status": "PASS", "message": "Preflight aceptado"}

    return {
        "path": path,
        "status": "FAIL",
        "message": (
            f"status={response.status_code} allow-origin={allow_origin} "
            f"cabeceras faltantes={', '.join(missing) or 'ninguna'}"
        ),
    }


def print_results(results: Dict):
    print(f"CORS: {results['base_url']} (Origin: {results['origin']})")
    print("=" * 50)
    for check in results["checks"]:
        print(f"[{check['status']}] {check['path']}: {check['message']}")
    summary = results["summary"]
    print("-" * 50)
    print(f"Total: {summary['total']}  Passed: {summary['passed']}  Failed: {summary['failed']}")


if __name__ == "__main__":
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"

    results = check_cors_configuration(base_url)
    print_results(results)

    if results["summary"]["failed"] > 0:
        sys.exit(1)
