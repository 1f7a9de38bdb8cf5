# truefans/modules/digital_passes/templates/pass_email_templates.py

"""
Email templates for delivering a digital pass
"""

DIGITAL_PASS_SUBJECT_TEMPLATE = "Your Digital Pass for {{ restaurant_name }}"

DIGITAL_PASS_HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Your Digital Pass for {{ restaurant_name }}</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <h1>Welcome to {{ restaurant_name }}'s Loyalty Program!</h1>
    <p>Hi {{ holder_name }}, here's your digital pass:</p>
    <div style="background-color: {{ card_background }};
                color: {{ card_text_color }};
                padding: 20px;
                border-radius: 10px;
                text-align: center;">
        {% if logo %}
        <img src="{{ logo }}" alt="Restaurant Logo" style="max-width: 200px;">
        {% endif %}
        <h2>{{ restaurant_name }}</h2>
        {% if custom_message %}
        <p>{{ custom_message }}</p>
        {% endif %}
        <p>Pass ID: {{ pass_id }}</p>
        {% if expires_on %}
        <p>Valid until: {{ expires_on }}</p>
        {% endif %}
    </div>
    <p>To add this pass to your digital wallet, click the button below:</p>
    <a href="{{ wallet_url }}"
       style="background-color: {{ primary_color }};
              color: white;
              padding: 10px 20px;
              text-decoration: none;
              border-radius: 5px;">
        Add to Wallet
    </a>
    <p style="font-size: 12px; color: #666;">&copy; {{ current_year }} {{ restaurant_name }}</p>
</body>
</html>
"""

DIGITAL_PASS_TEXT_TEMPLATE = """
Welcome to {{ restaurant_name }}'s Loyalty Program!

Hi {{ holder_name }}, here's your digital pass.

{% if custom_message %}{{ custom_message }}

{% endif %}Pass ID: {{ pass_id }}
{% if expires_on %}Valid until: {{ expires_on }}
{% endif %}
Add this pass to your digital wallet:
{{ wallet_url }}
"""
