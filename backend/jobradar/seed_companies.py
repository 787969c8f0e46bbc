"""
Curated companies used to bootstrap discovery before any LLM-driven
company search has run. All are known to publish a career page.
"""

SEED_COMPANIES = [
    # YC alumni
    ("Stripe", "https://stripe.com"),
    ("Airbnb", "https://airbnb.com"),
    ("DoorDash", "https://doordash.com"),
    ("Instacart", "https://instacart.com"),
    ("Coinbase", "https://coinbase.com"),
    ("Dropbox", "https://dropbox.com"),
    ("Reddit", "https://reddit.com"),
    ("Twitch", "https://twitch.tv"),
    # Big tech
    ("Google", "https://google.com"),
    ("Microsoft", "https://microsoft.com"),
    ("Amazon", "https://amazon.jobs"),
    ("Meta", "https://meta.com"),
    ("Apple", "https://apple.com"),
    ("Netflix", "https://netflix.com"),
    # Developer tools
    ("GitHub", "https://github.com"),
    ("GitLab", "https://gitlab.com"),
    ("Atlassian", "https://atlassian.com"),
    ("JetBrains", "https://jetbrains.com"),
    ("Vercel", "https://vercel.com"),
    ("Supabase", "https://supabase.com"),
    ("Grafana", "https://grafana.com"),
    ("HashiCorp", "https://hashicorp.com"),
    ("Docker", "https://docker.com"),
    ("MongoDB", "https://mongodb.com"),
    ("Elastic", "https://elastic.co"),
    ("Cloudflare", "https://cloudflare.com"),
    ("Datadog", "https://datadoghq.com"),
    ("Splunk", "https://splunk.com"),
    ("PagerDuty", "https://pagerduty.com"),
    # Fintech
    ("Plaid", "https://plaid.com"),
    ("Square", "https://squareup.com"),
    ("Robinhood", "https://robinhood.com"),
    ("Chime", "https://chime.com"),
    ("Brex", "https://brex.com"),
    ("Ramp", "https://ramp.com"),
    # AI/ML
    ("OpenAI", "https://openai.com"),
    ("Anthropic", "https://anthropic.com"),
    ("Hugging Face", "https://huggingface.co"),
    ("Scale AI", "https://scale.com"),
    ("Weights & Biases", "https://wandb.ai"),
    # Collaboration
    ("Slack", "https://slack.com"),
    ("Notion", "https://notion.so"),
    ("Figma", "https://figma.com"),
    ("Miro", "https://miro.com"),
    ("Canva", "https://canva.com"),
    ("Airtable", "https://airtable.com"),
    ("Asana", "https://asana.com"),
    ("Monday.com", "https://monday.com"),
    ("Zapier", "https://zapier.com"),
    ("Calendly", "https://calendly.com"),
    # Security
    ("CrowdStrike", "https://crowdstrike.com"),
    ("Okta", "https://okta.com"),
    ("1Password", "https://1password.com"),
    ("Snyk", "https://snyk.io"),
    # Cloud and data
    ("Snowflake", "https://snowflake.com"),
    ("Databricks", "https://databricks.com"),
    ("DigitalOcean", "https://digitalocean.com"),
    # E-commerce
    ("Shopify", "https://shopify.com"),
    ("Etsy", "https://etsy.com"),
    ("Faire", "https://faire.com"),
    # Travel
    ("Expedia", "https://expedia.com"),
    ("Booking.com", "https://booking.com"),
    ("Tripadvisor", "https://tripadvisor.com"),
    # Health
    ("Oscar Health", "https://hioscar.com"),
    ("Calm", "https://calm.com"),
    ("Headspace", "https://headspace.com"),
    # Remote-first
    ("Automattic", "https://automattic.com"),
    ("Buffer", "https://buffer.com"),
    ("Doist", "https://doist.com"),
    ("InVision", "https://invisionapp.com"),
    ("Basecamp", "https://basecamp.com"),
    # Emerging
    ("Warp", "https://warp.dev"),
    ("Linear", "https://linear.app"),
    ("Raycast", "https://raycast.com"),
    ("Replit", "https://replit.com"),
    ("Loom", "https://loom.com"),
    ("Retool", "https://retool.com"),
    ("PostHog", "https://posthog.com"),
    ("Segment", "https://segment.com"),
    ("Amplitude", "https://amplitude.com"),
    # India
    ("Razorpay", "https://razorpay.com"),
    ("Zerodha", "https://zerodha.com"),
    ("Cred", "https://cred.club"),
    ("Swiggy", "https://swiggy.com"),
    ("Zomato", "https://zomato.com"),
    ("Flipkart", "https://flipkart.com"),
    ("PhonePe", "https://phonepe.com"),
    ("Groww", "https://groww.in"),
    ("Meesho", "https://meesho.com"),
    ("Ola", "https://olacabs.com"),
]
