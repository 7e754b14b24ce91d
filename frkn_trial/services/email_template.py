"""
FRKN Trial - activation email template
Placeholders: $host, $sub_id, $info_url
"""

from string import Template

TRIAL_EMAIL_SUBJECT = "FRKN VPN Trial 🚀"

TRIAL_EMAIL_HTML = Template("""\
<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<title>FRKN VPN Trial</title>
<style>
    body {
        font-family: Arial, sans-serif;
        background-color: #f4f4f4;
        margin: 0;
        padding: 0;
    }
    .container {
        width: 100%;
        max-width: 600px;
        margin: 0 auto;
        background-color: #ffffff;
        padding: 20px;
        border-radius: 12px;
        box-shadow: 0 4px 12px rgba(0,0,0,0.1);
    }
    .header {
        text-align: center;
        margin-bottom: 20px;
    }
    h1 {
        color: #1d4ed8;
        font-size: 24px;
    }
    p {
        color: #374151;
        font-size: 16px;
        line-height: 1.5;
    }
    .footer {
        font-size: 12px;
        color: #9ca3af;
        text-align: center;
        margin-top: 20px;
    }
</style>
</head>
<body>
<div class="container">
    <div class="header">
        <h1>Твой триал активирован!</h1>
    </div>
    <p>Привет!</p>
    <p>Твой триал для <strong>FRKN</strong> успешно активирован 🎉</p>
    <p>Информация по подписке:</p>
    <p>
        <strong>ID:</strong> $sub_id<br/>
        <strong>Ссылка:</strong> <a href="$info_url">$info_url</a>
    </p>
    <a href="$info_url"
       style="
           display: inline-block;
           padding: 12px 24px;
           background-color: #1d4ed8;
           color: #ffffff !important;
           text-decoration: none;
           border-radius: 8px;
           font-weight: bold;
       ">
       Перейти к подписке
    </a>
    <p>Подписывайся на наш Telegram: <a href="https://t.me/frkn_org">@frkn_org</a></p>
    <div class="footer">
        <p><a href="https://t.me/frkn_support">Поддержка</a></p>
        Vive la résistance!<br/>
        © 2026 FRKN
    </div>
</div>
</body>
</html>
""")


def subscription_info_url(host: str, sub_id: str) -> str:
    return f"{host.rstrip('/')}/sub/info?id={sub_id}"


def render_trial_email(host: str, sub_id: str) -> str:
    """Render the HTML body of the activation email"""
    return TRIAL_EMAIL_HTML.substitute(
        host=host,
        sub_id=sub_id,
        info_url=subscription_info_url(host, sub_id),
    )
