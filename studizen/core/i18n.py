"""
Localization

User-facing message table for the supported display languages
(English, Indonesian, Chinese) and helpers to resolve a request's language.
"""

from typing import Dict, Optional

from studizen.models.enums import Language


MESSAGES: Dict[str, Dict[str, str]] = {
    # Registration / verification
    "registration_success": {
        "en": "Account created! Please verify your email with the code we sent.",
        "id": "Akun berhasil dibuat! Silakan verifikasi email Anda dengan kode yang kami kirim.",
        "zh": "账户已创建！请使用我们发送的验证码验证您的邮箱。",
    },
    "code_sent": {
        "en": "A new verification code has been sent to your email.",
        "id": "Kode verifikasi baru telah dikirim ke email Anda.",
        "zh": "新的验证码已发送到您的邮箱。",
    },
    "code_fallback": {
        "en": "We could not send the email. Please enter this verification code: {code}",
        "id": "Email gagal dikirim. Silakan masukkan kode OTP: {code}",
        "zh": "邮件发送失败。请输入此验证码：{code}",
    },
    "verification_success": {
        "en": "Your account has been verified.",
        "id": "Akun Anda telah diverifikasi.",
        "zh": "您的账户已验证。",
    },
    "code_incorrect": {
        "en": "The verification code is incorrect. {remaining} attempt(s) left.",
        "id": "Kode OTP tidak valid. Sisa {remaining} percobaan.",
        "zh": "验证码不正确。还剩 {remaining} 次尝试。",
    },
    "code_expired": {
        "en": "The verification code has expired. Please request a new one.",
        "id": "Kode OTP sudah kedaluwarsa. Silakan kirim ulang kode.",
        "zh": "验证码已过期，请重新发送。",
    },
    "too_many_attempts": {
        "en": "Too many attempts. Please request a new code.",
        "id": "Terlalu banyak percobaan. Silakan kirim ulang kode.",
        "zh": "尝试次数过多，请重新获取验证码。",
    },
    "resend_cooldown": {
        "en": "Please wait {seconds} seconds before requesting a new code.",
        "id": "Tunggu {seconds} detik sebelum mengirim ulang kode.",
        "zh": "请等待 {seconds} 秒后再重新发送验证码。",
    },
    "already_verified": {
        "en": "This email is already verified.",
        "id": "Email ini sudah diverifikasi.",
        "zh": "该邮箱已验证。",
    },
    # Accounts
    "email_registered": {
        "en": "Email already registered.",
        "id": "Email sudah terdaftar.",
        "zh": "该邮箱已注册。",
    },
    "username_taken": {
        "en": "Username is already taken.",
        "id": "Username sudah digunakan.",
        "zh": "用户名已被使用。",
    },
    "user_not_found": {
        "en": "User not found.",
        "id": "Pengguna tidak ditemukan.",
        "zh": "用户不存在。",
    },
    "incorrect_credentials": {
        "en": "Incorrect email or password.",
        "id": "Email atau password salah.",
        "zh": "邮箱或密码错误。",
    },
    "email_not_verified": {
        "en": "Email not verified. A new verification code has been sent to your email.",
        "id": "Email belum diverifikasi. Kode verifikasi baru telah dikirim ke email Anda.",
        "zh": "邮箱尚未验证。新的验证码已发送到您的邮箱。",
    },
    "reset_code_sent": {
        "en": "If an account exists with this email, a password reset code has been sent.",
        "id": "Jika akun dengan email ini terdaftar, kode reset password telah dikirim.",
        "zh": "如果该邮箱已注册，密码重置验证码已发送。",
    },
    "reset_email_failed": {
        "en": "We could not send the password reset email. Please try again later.",
        "id": "Email reset password gagal dikirim. Silakan coba lagi nanti.",
        "zh": "无法发送密码重置邮件，请稍后重试。",
    },
    "password_reset_success": {
        "en": "Your password has been reset. You can now log in with your new password.",
        "id": "Password Anda telah diperbarui. Silakan login dengan password baru.",
        "zh": "密码已重置，请使用新密码登录。",
    },
    "password_changed": {
        "en": "Password changed successfully.",
        "id": "Password berhasil diubah.",
        "zh": "密码修改成功。",
    },
    "current_password_incorrect": {
        "en": "The current password you entered is incorrect.",
        "id": "Password lama yang Anda masukkan tidak benar.",
        "zh": "当前密码不正确。",
    },
    "password_incorrect": {
        "en": "The password you entered is incorrect.",
        "id": "Password yang Anda masukkan tidak benar.",
        "zh": "密码不正确。",
    },
    "email_unchanged": {
        "en": "The new email is the same as the current one.",
        "id": "Email baru sama dengan email saat ini.",
        "zh": "新邮箱与当前邮箱相同。",
    },
    "email_changed": {
        "en": "Your email has been updated. Please verify the new address with the code we sent.",
        "id": "Email Anda telah diperbarui. Silakan periksa email baru untuk konfirmasi.",
        "zh": "邮箱已更新。请使用我们发送的验证码验证新邮箱。",
    },
    "account_deleted": {
        "en": "Your account and all of its data have been permanently deleted.",
        "id": "Akun dan semua data Anda telah dihapus permanen.",
        "zh": "您的账户及所有数据已被永久删除。",
    },
    # Generic
    "try_again": {
        "en": "Something went wrong. Please try again.",
        "id": "Terjadi kesalahan. Silakan coba lagi.",
        "zh": "出现错误，请重试。",
    },
    "record_not_found": {
        "en": "Record not found.",
        "id": "Data tidak ditemukan.",
        "zh": "未找到记录。",
    },
    "invalid_time_range": {
        "en": "End time must be after start time.",
        "id": "Waktu selesai harus setelah waktu mulai.",
        "zh": "结束时间必须晚于开始时间。",
    },
    "premium_required": {
        "en": "This is a Premium feature. Upgrade to Premium to use it.",
        "id": "Ini adalah Fitur Premium. Upgrade ke Premium untuk menggunakannya.",
        "zh": "这是高级功能。请升级到高级版后使用。",
    },
    "admin_required": {
        "en": "Administrator access required.",
        "id": "Akses administrator diperlukan.",
        "zh": "需要管理员权限。",
    },
    "subscription_success": {
        "en": "Premium subscription activated.",
        "id": "Langganan Premium berhasil diaktifkan.",
        "zh": "高级版订阅已激活。",
    },
    # Verification email
    "email_subject": {
        "en": "Studizen Verification Code",
        "id": "Kode Verifikasi Studizen",
        "zh": "Studizen 验证码",
    },
    "email_tagline": {
        "en": "Academic Management Platform",
        "id": "Platform Manajemen Akademik",
        "zh": "学业管理平台",
    },
    "email_heading": {
        "en": "Verify Your Account",
        "id": "Verifikasi Akun Anda",
        "zh": "验证您的账户",
    },
    "email_intro_named": {
        "en": "Hi {name}, use the following verification code to complete your registration:",
        "id": "Halo {name}, gunakan kode verifikasi berikut untuk menyelesaikan pendaftaran akun Anda:",
        "zh": "{name}，您好！请使用以下验证码完成注册：",
    },
    "email_intro": {
        "en": "Use the following verification code to complete your registration:",
        "id": "Gunakan kode verifikasi berikut untuk menyelesaikan pendaftaran akun Anda:",
        "zh": "请使用以下验证码完成注册：",
    },
    "email_expiry": {
        "en": "This code will expire in {minutes} minutes.",
        "id": "Kode ini akan kedaluwarsa dalam {minutes} menit.",
        "zh": "此验证码将在 {minutes} 分钟后过期。",
    },
    "email_do_not_share": {
        "en": "Do not share this code with anyone.",
        "id": "Jangan bagikan kode ini kepada siapa pun.",
        "zh": "请勿与任何人分享此验证码。",
    },
    "email_ignore": {
        "en": "If you did not sign up for Studizen, you can ignore this email.",
        "id": "Jika Anda tidak mendaftar di Studizen, abaikan email ini.",
        "zh": "如果您没有注册 Studizen，请忽略此邮件。",
    },
    # Password reset email
    "reset_email_subject": {
        "en": "Reset your Studizen password",
        "id": "Reset Password Studizen",
        "zh": "重置您的 Studizen 密码",
    },
    "reset_email_heading": {
        "en": "Password Reset",
        "id": "Reset Password",
        "zh": "重置密码",
    },
    "reset_email_intro_named": {
        "en": "Hi {name}, we received a request to reset your password. Use the code below to reset it:",
        "id": "Halo {name}, kami menerima permintaan reset password akun Anda. Gunakan kode berikut:",
        "zh": "{name}，您好！我们收到了重置密码的请求。请使用以下验证码：",
    },
    "reset_email_intro": {
        "en": "We received a request to reset your password. Use the code below to reset it:",
        "id": "Kami menerima permintaan reset password akun Anda. Gunakan kode berikut:",
        "zh": "我们收到了重置密码的请求。请使用以下验证码：",
    },
    "reset_email_ignore": {
        "en": "If you did not request a password reset, you can ignore this email. Your account is still secure.",
        "id": "Jika Anda tidak meminta reset password, abaikan email ini. Akun Anda tetap aman.",
        "zh": "如果您没有请求重置密码，请忽略此邮件，您的账户仍然安全。",
    },
}


def resolve_language(value: Optional[str], default: str = Language.EN.value) -> str:
    """
    Normalize a language tag to one of the supported codes.

    Accepts full tags like "id-ID" or "zh-Hans-CN". Unsupported or empty
    values fall back to `default`.
    """
    if not value:
        return default
    primary = value.strip().lower().replace("_", "-").split("-")[0]
    if primary in {lang.value for lang in Language}:
        return primary
    return default


def language_from_header(accept_language: Optional[str], default: str = Language.EN.value) -> str:
    """
    Pick the first supported language from an Accept-Language header.

    Quality weights are ignored; entries are taken in the order sent.
    """
    if not accept_language:
        return default
    for part in accept_language.split(","):
        tag = part.split(";")[0].strip()
        if tag and tag != "*":
            resolved = resolve_language(tag, default="")
            if resolved:
                return resolved
    return default


def translate(key: str, language: Optional[str] = None, **params: object) -> str:
    """
    Look up a message in the requested language and format it.

    Missing translations fall back to English; an unknown key is returned
    unchanged so it stays visible in logs and responses.
    """
    entry = MESSAGES.get(key)
    if entry is None:
        return key
    text = entry.get(resolve_language(language), entry[Language.EN.value])
    return text.format(**params) if params else text
