"""
Marketplace search gateway.

Responsibilities:
- Hold Google Programmable Search credentials.
- Issue one provider request per query, capped per recommendation run.
- Keep only results that link to a supported food-delivery marketplace.
- Isolate per-query failures so one bad call never aborts the batch.
"""
