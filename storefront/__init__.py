"""Boutique en ligne: catalogue, panier, checkout Stripe et commandes Supabase."""
