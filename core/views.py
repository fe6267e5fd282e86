from django.http import HttpResponse, JsonResponse

HOME_PAGE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8" />
<meta name="viewport" content="width=device-width, initial-scale=1" />
<title>Fuji Paygate · Mystery Box</title>
<style>
    :root {
        font-family: "Inter", -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
        color: #1f2937;
        background: linear-gradient(160deg, #fff1f2, #fff7ed 55%, #ffffff);
    }
    body {
        margin: 0;
        min-height: 100vh;
        display: grid;
        place-items: center;
    }
    .card {
        width: min(860px, 92vw);
        padding: 2.75rem 3rem;
        border-radius: 28px;
        background: #ffffff;
        border: 1px solid rgba(232, 65, 66, 0.18);
        box-shadow: 0 18px 40px rgba(232, 65, 66, 0.08);
    }
    .tag {
        font-size: 0.8rem;
        letter-spacing: 0.18em;
        text-transform: uppercase;
        color: #e84142;
        font-weight: 700;
    }
    h1 {
        font-size: clamp(2.25rem, 4vw, 3.25rem);
        margin: 0.35rem 0 1rem;
    }
    ol {
        line-height: 1.7;
        padding-left: 1.25rem;
    }
    code {
        background: rgba(232, 65, 66, 0.08);
        padding: 0.2rem 0.45rem;
        border-radius: 6px;
    }
</style>
</head>
<body>
    <main class="card">
        <div class="tag">Avalanche Fuji · HTTP 402</div>
        <h1>Mystery Box</h1>
        <ol>
            <li><code>GET /api/content/mystery</code> returns <code>402</code> with the payment requirement.</li>
            <li>Transfer the required tokens to the listed recipient on Avalanche Fuji.</li>
            <li>Repeat the request with an <code>X-PAYMENT</code> header holding
                <code>{"txHash", "network", "amount"}</code> until the transaction is verified.</li>
        </ol>
        <p>Network, token and retry schedule: <code>GET /api/payment/supported</code></p>
    </main>
</body>
</html>"""


def home(request):
    return HttpResponse(HOME_PAGE_HTML, content_type="text/html; charset=utf-8")


def health(request):
    return JsonResponse({"status": "ok"})
