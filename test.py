# Manual smoke check against a running server: uvicorn main:app --port 8000
import requests
import json

payload = {
    "name": "Test Applicant",
    "email": "test@example.com",
    "institution": "Sciences Po",
    "program": "Master in Economics",
    "projects": "Social Norms of Social Media",
    "interest_reason": "I study how online communities form and enforce norms.",
    "hours_per_week": "10",
    "quant_current": "Stata, R",
    "quant_develop": "Python, text analysis",
}

response = requests.post(
    "http://localhost:8000/webhook/application",
    headers={"Content-Type": "application/json"},
    data=json.dumps(payload)
)

print("✅ Status:", response.status_code)
print("📦 Response:", response.json())
