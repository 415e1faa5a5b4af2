"""SSIM record type 3 (flight leg record) layout, 200 characters wide."""

from ssim_parser.schema.fields import FieldSpec, Schema

RECORD_TYPE = "3"

VERSION_3 = Schema(
    version=3,
    record_type=RECORD_TYPE,
    fields=(
        FieldSpec("record_type", 1),
        FieldSpec("operational_suffix", 1),
        FieldSpec("airline_designator", 3),
        FieldSpec("flight_number", 4),
        FieldSpec("itinerary_variation_identifier", 2),
        FieldSpec("leg_sequence_number", 2),
        FieldSpec("service_type", 1),
        FieldSpec("operation_start_date", 7),
        FieldSpec("operation_end_date", 7),
        FieldSpec("operation_days_of_week", 7),
        FieldSpec("frequency_rate", 1),
        FieldSpec("departure_station", 3),
        FieldSpec("passenger_departure_time", 4),
        FieldSpec("aircraft_departure_time", 4),
        FieldSpec("utc_local_departure_time_variant", 5),
        FieldSpec("passenger_terminal_departure", 2),
        FieldSpec("arrival_station", 3),
        FieldSpec("passenger_arrival_time", 4),
        FieldSpec("aircraft_arrival_time", 4),
        FieldSpec("utc_local_arrival_time_variant", 5),
        FieldSpec("passenger_terminal_arrival", 2),
        FieldSpec("aircraft_type", 3),
        FieldSpec("filler_1", 20, exported=False),
        FieldSpec("passenger_reservations_booking", 5),
        FieldSpec("meal_service_note", 10, exported=False),
        FieldSpec("joint_operation_airline_designators", 9, exported=False),
        FieldSpec("filler_2", 2, exported=False),
        FieldSpec("secure_flight_indicator", 1, exported=False),
        FieldSpec("filler_3", 5, exported=False),
        FieldSpec("itinerary_variation_overflow", 1),
        FieldSpec("aircraft_owner", 3),
        FieldSpec("cockpit_crew_employer", 3),
        FieldSpec("cabin_crew_employer", 3),
        FieldSpec("onward_airline_designator", 3, exported=False),
        FieldSpec("onward_flight_number", 4, exported=False),
        FieldSpec("aircraft_rotation_layover", 1),
        FieldSpec("onward_operational_suffix", 1),
        FieldSpec("filler_4", 1, exported=False),
        FieldSpec("flight_transit_layover", 1),
        FieldSpec("operating_airline_disclosure", 1),
        FieldSpec("traffic_restriction_code", 11),
        FieldSpec("filler_5", 12, exported=False),
        FieldSpec("aircraft_configuration_version", 20),
        FieldSpec("date_variation", 2),
        FieldSpec("record_serial_number", 6),
    ),
)

__all__ = ["VERSION_3", "RECORD_TYPE"]
