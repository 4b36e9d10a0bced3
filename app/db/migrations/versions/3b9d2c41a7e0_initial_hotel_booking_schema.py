from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "3b9d2c41a7e0"
down_revision = None
branch_labels = None
depends_on = None


role_enum = sa.Enum("user", "admin", "hotelManager", name="role")
tier_enum = sa.Enum("none", "bronze", "silver", "gold", "platinum", "diamond", name="membershiptier")
# Same type reused by bookings; created once with users
booking_tier_enum = postgresql.ENUM(
    "none", "bronze", "silver", "gold", "platinum", "diamond", name="membershiptier", create_type=False
)
room_type_enum = sa.Enum("standard", "superior", "deluxe", "suite", name="roomtype")
booking_status_enum = sa.Enum(
    "pending", "confirmed", "canceled", "checkedIn", "completed", name="bookingstatus"
)
payment_status_enum = sa.Enum(
    "unpaid", "pending", "completed", "failed", "canceled", name="paymentstatus"
)
payment_method_enum = sa.Enum("Card", "Bank", "ThaiQR", name="paymentmethod")
log_type_enum = sa.Enum("REFUND", "PAYMENT", "WARNING", "MEMBERSHIP", name="logtype")


def upgrade():
    op.create_table(
        "hotels",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        sa.Column("address", sa.String(), nullable=False),
        sa.Column("tel", sa.String(), nullable=True),
    )
    op.create_index("ix_hotels_id", "hotels", ["id"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("tel", sa.String(10), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", role_enum, nullable=False, server_default="user"),
        sa.Column("responsible_hotel_id", sa.Integer(), sa.ForeignKey("hotels.id"), nullable=True),
        sa.Column("credit", sa.Float(), nullable=False, server_default="0"),
        sa.Column("membership_points", sa.Float(), nullable=False, server_default="0"),
        sa.Column("membership_tier", tier_enum, nullable=False, server_default="none"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("hotel_id", sa.Integer(), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("type", room_type_enum, nullable=False, server_default="standard"),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.UniqueConstraint("hotel_id", "number", name="uq_hotel_room_number"),
    )
    op.create_index("ix_rooms_id", "rooms", ["id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("rooms.id"), nullable=False),
        sa.Column("hotel_id", sa.Integer(), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("check_in_date", sa.DateTime(), nullable=False),
        sa.Column("check_out_date", sa.DateTime(), nullable=False),
        sa.Column("status", booking_status_enum, nullable=False, server_default="pending"),
        sa.Column("tier_at_booking", booking_tier_enum, nullable=False, server_default="none"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("check_out_date > check_in_date", name="ck_booking_dates"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])

    op.create_table(
        "room_unavailable_periods",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_room_unavailable_periods_id", "room_unavailable_periods", ["id"])
    op.create_index("ix_room_unavailable_periods_booking_id", "room_unavailable_periods", ["booking_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("status", payment_status_enum, nullable=False, server_default="unpaid"),
        sa.Column("method", payment_method_enum, nullable=False),
        sa.Column("payment_date", sa.DateTime(), nullable=False),
        sa.Column("canceled_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_payments_id", "payments", ["id"])
    op.create_index("ix_payments_booking_id", "payments", ["booking_id"])

    # One completed payment per booking
    op.create_index(
        "uq_payment_completed_per_booking",
        "payments",
        ["booking_id"],
        unique=True,
        postgresql_where=sa.text("status = 'completed'"),
        sqlite_where=sa.text("status = 'completed'"),
    )

    op.create_table(
        "logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", log_type_enum, nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_logs_id", "logs", ["id"])
    op.create_index("ix_logs_user_id", "logs", ["user_id"])


def downgrade():
    op.drop_table("logs")
    op.drop_table("payments")
    op.drop_table("room_unavailable_periods")
    op.drop_table("bookings")
    op.drop_table("rooms")
    op.drop_table("users")
    op.drop_table("hotels")

    bind = op.get_bind()
    for enum in (
        log_type_enum,
        payment_method_enum,
        payment_status_enum,
        booking_status_enum,
        room_type_enum,
        tier_enum,
        role_enum,
    ):
        enum.drop(bind, checkfirst=True)
