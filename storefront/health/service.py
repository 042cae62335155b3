from urllib.parse import urlparse
import socket

from storefront import config
import storefront.infra.supabase_client as supabase_client

TABLES = ("products", "orders")

def _check_table(client, name: str):
    try:
        res = client.table(name).select("id").limit(1).execute()
        return {"ok": True, "rows": len(res.data or [])}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def stripe_config_info():
    """Présence des clés Stripe (booléens uniquement, jamais les secrets)."""
    return {
        "secret_key": bool(config.STRIPE_SECRET_KEY),
        "webhook_secret": bool(config.STRIPE_WEBHOOK_SECRET),
    }

def health_supabase_info():
    effective_url = config.SUPABASE_URL
    hostname = urlparse(effective_url).hostname if effective_url else None
    dns_ok = None
    dns_error = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except OSError as e:
            dns_ok = False
            dns_error = str(e)

    info = {
        "supabase_url": effective_url,
        "hostname": hostname,
        "dns_ok": dns_ok,
        "dns_error": dns_error,
        "connect_ok": False,
        "error": None,
        "tables": {},
        "stripe": stripe_config_info(),
    }
    try:
        client = supabase_client.get_supabase()
        for t in TABLES:
            info["tables"][t] = _check_table(client, t)
        info["connect_ok"] = True
    except Exception as e:
        info["error"] = str(e)
    return info
